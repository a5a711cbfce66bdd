from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class GeneratePromptIn(BaseModel):
    components: dict[str, str] = Field(
        description="Prompt sections keyed by name (e.g. 역할, 작업, 맥락).",
        examples=[{"역할": "여행 가이드", "작업": "3일 일정 추천"}],
    )


class PromptTextIn(BaseModel):
    promptText: str = Field(description="Prompt text written by the user.")


class GeneratePromptOut(BaseModel):
    finalPrompt: str = Field(description="Complete markdown prompt assembled by the model.")


class FeedbackOut(BaseModel):
    feedback: str = Field(description="Markdown critique of the submitted prompt.")


class PromptAnalysis(BaseModel):
    """
    Schema of the JSON-mode model output.

    Only used for validation; the parsed upstream object is relayed as-is.
    """

    model_config = ConfigDict(extra="allow")

    summary: StrictStr = Field(min_length=1)
    feedback: StrictStr = Field(min_length=1)
    components: list[StrictStr]


class MessageOut(BaseModel):
    """Error body returned by every prompt function."""

    message: str = Field(examples=["분석할 텍스트가 없습니다."])
