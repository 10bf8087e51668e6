"""
Agent implementations for CVLens.

Contains the modules that carry a document from AI call to overlay:
- Document Analysis Agent
- Feedback Normalizer
- Annotation Deriver
- Overlay Renderer
"""
