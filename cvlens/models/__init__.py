"""
Data models for CVLens.

- Feedback: items and the aggregate analysis result
- Annotation: derived overlay entities and page geometry
- Outcome: settled results of analysis calls and parsing
"""
