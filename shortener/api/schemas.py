"""
API Response Schemas

Pydantic model for the full redirect listing. Submission and toggle
endpoints answer in plain text; the typed listings return plain JSON arrays.
"""

from pydantic import BaseModel, Field


class RedirectSummary(BaseModel):
    """One entry of the full redirect listing."""
    id: str = Field(..., description="Five-character identifier")
    url: str = Field(..., description="Target URL")
    enabled: bool
