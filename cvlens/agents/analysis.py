"""
Document Analysis Agent.

Sends a PDF to Gemini together with the feedback schema and returns the
raw structured response.
"""

import logging
from typing import Any, Dict, Optional

import google.generativeai as genai
import requests

from cvlens.models.feedback import PAPER_SCHEMA, RESUME_SCHEMA, SCHEMA_KINDS
from cvlens.models.outcome import AnalysisOutcome

logger = logging.getLogger(__name__)


RESUME_SYSTEM_PROMPT = """You are a professional career coach and resume reviewer.

Your task: analyze CV/resume documents and provide structured, actionable,
professional feedback that helps the candidate improve their chances of success.

Output valid JSON only."""

RESUME_USER_PROMPT = """Analyze the attached PDF resume. For each section (Contact Information, Summary,
Work Experience, Education, Skills, Certifications, Projects, ...) provide:

1. A concise, professional headline. Do NOT put numbers or ids in titles (e.g. "1.09 Focus on Results").
2. Detailed, actionable feedback or suggestions.
3. A type: "strength", "improvement", "missing", "warning" or "info".
4. The section of the CV the feedback relates to.
5. The page number and the vertical pixel span (startY, endY) of the commented region so it can be highlighted.

Finish with an overall summary and a list of top recommendations.

Detect the language of the resume and return it as code and name (e.g. "fr - French")
in the "language" field. Write ALL feedback, the summary and the recommendations
in that same language.

Focus on:
- Clarity and professionalism of presentation
- Relevance and impact of experience and skills
- Quantifiable achievements
- Consistency and formatting
- Missing or weak sections
- Common pitfalls (typos, vague language, lack of results)

Give every item a unique integer id starting at 1."""

PAPER_SYSTEM_PROMPT = """You are an experienced academic reviewer.

Your task: review academic papers and point out errors, weaknesses and
strengths with precise, constructive comments.

Output valid JSON only."""

PAPER_USER_PROMPT = """Review the attached PDF paper. For each finding provide:

1. A short title without numbers or ids.
2. Detailed comments explaining the finding and how to address it.
3. A type: "error", "warning", "info" or "success".
4. An optional score for the aspect under review (e.g. "7/10").
5. The page number and the vertical pixel span (startY, endY) of the commented region.

Finish with an overall summary.

Give every item a unique integer id starting at 1."""

PROMPTS = {
    RESUME_SCHEMA: (RESUME_SYSTEM_PROMPT, RESUME_USER_PROMPT),
    PAPER_SCHEMA: (PAPER_SYSTEM_PROMPT, PAPER_USER_PROMPT),
}


def build_response_schema(schema_version: str) -> Dict[str, Any]:
    """Response schema handed to Gemini for structured output."""
    item_properties: Dict[str, Any] = {
        "id": {"type": "integer"},
        "title": {"type": "string", "description": "Short headline, no numbers or ids"},
        "details": {"type": "string", "description": "Detailed, actionable feedback"},
        "type": {
            "type": "string",
            "format": "enum",
            "enum": list(SCHEMA_KINDS[schema_version]),
        },
        "location": {
            "type": "object",
            "properties": {
                "pageNumber": {"type": "integer", "description": "1-based page number"},
                "coordinates": {
                    "type": "object",
                    "properties": {
                        "startY": {"type": "number", "description": "Start Y on the page (pixels)"},
                        "endY": {"type": "number", "description": "End Y on the page (pixels)"},
                        "x": {"type": "number", "description": "X of the annotation (pixels)"},
                    },
                    "required": ["startY", "endY"],
                },
            },
            "required": ["pageNumber"],
        },
    }
    result_properties: Dict[str, Any] = {
        "items": {"type": "array", "items": {"type": "object"}},
        "summary": {"type": "string"},
    }
    required = ["items"]

    if schema_version == RESUME_SCHEMA:
        item_properties["section"] = {
            "type": "string",
            "description": "Resume section, e.g. Work Experience, Education, Skills",
        }
        result_properties["recommendations"] = {"type": "array", "items": {"type": "string"}}
        result_properties["language"] = {"type": "string", "description": "Language code and name"}
        required.append("language")
    else:
        item_properties["score"] = {"type": "string"}

    result_properties["items"]["items"] = {
        "type": "object",
        "properties": item_properties,
        "required": ["id", "title", "details", "type"],
    }
    return {"type": "object", "properties": result_properties, "required": required}


class DocumentAnalysisAgent:
    """
    Calls Gemini with a PDF attachment and a response schema.

    One request per call, no retries: failures come back as an
    AnalysisOutcome carrying a user-facing message, and the user
    re-triggers the analysis.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        temperature: float = 0.0,
        schema_version: str = RESUME_SCHEMA,
        fetch_timeout_seconds: int = 60
    ):
        """
        Initialize analysis agent.

        Args:
            api_key: Gemini API key (may be empty; analyze() then reports it)
            model_name: Gemini model to use
            temperature: LLM temperature (0.0 for deterministic)
            schema_version: "resume-v1" or "paper-v1"
            fetch_timeout_seconds: Timeout for downloading the PDF
        """
        if schema_version not in PROMPTS:
            raise ValueError(f"Invalid schema_version: {schema_version}. Must be one of {sorted(PROMPTS)}")

        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.schema_version = schema_version
        self.fetch_timeout_seconds = fetch_timeout_seconds

        system_prompt, self.user_prompt = PROMPTS[schema_version]

        # Configure Gemini
        if api_key:
            genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            model_name=model_name,
            generation_config={
                "temperature": temperature,
                "response_mime_type": "application/json",
                "response_schema": build_response_schema(schema_version),
            },
            system_instruction=system_prompt
        )

        logger.info(
            f"Initialized DocumentAnalysisAgent with model={model_name}, "
            f"schema={schema_version}, temp={temperature}"
        )

    def analyze(self, document_url: str) -> AnalysisOutcome:
        """
        Analyze the PDF at a URL.

        Args:
            document_url: URL of the PDF document

        Returns:
            AnalysisOutcome with the raw JSON text, or the failure message
        """
        if not document_url:
            return AnalysisOutcome.configuration_error("PDF URL is required")

        if not self.api_key:
            return AnalysisOutcome.configuration_error(
                "API key is not configured. Please check your environment variables."
            )

        logger.info(f"Starting PDF analysis for: {document_url}")

        pdf_bytes = self._fetch_pdf(document_url)
        if pdf_bytes is None:
            return AnalysisOutcome.transport_error(f"Failed to download PDF from {document_url}")

        try:
            response = self.model.generate_content([
                {"mime_type": "application/pdf", "data": pdf_bytes},
                self.user_prompt,
            ])
            text = response.text
        except Exception as e:
            logger.error(f"Error analyzing PDF: {e}")
            return AnalysisOutcome.transport_error(str(e) or "An unknown error occurred")

        if not text or not text.strip():
            logger.error("Model returned an empty response")
            return AnalysisOutcome.transport_error("The model returned an empty response")

        logger.info("Analysis complete")
        return AnalysisOutcome.ok(text)

    def _fetch_pdf(self, document_url: str) -> Optional[bytes]:
        try:
            resp = requests.get(document_url, timeout=self.fetch_timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch PDF {document_url}: {e}")
            return None

        logger.debug(f"Fetched {len(resp.content)} bytes from {document_url}")
        return resp.content
