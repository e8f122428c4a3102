from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional

from services.review_service import ReviewScope
from services.scope_selector import SessionRange

_STATUS_MAX = 64
_STATUSES_MAX = 20
_SEARCH_TEXT_MAX = 500


class SessionRangeModel(BaseModel):
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_order(self):
        if self.start > self.end:
            raise ValueError("sessionRange.start must be <= sessionRange.end")
        return self


class ReviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(default=True, alias="dryRun")
    statuses: List[str] = Field(default_factory=list, max_length=_STATUSES_MAX)
    session_range: Optional[SessionRangeModel] = Field(default=None, alias="sessionRange")

    @field_validator("statuses", mode="before")
    @classmethod
    def normalize_statuses(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("statuses must be a list of strings")
        out: List[str] = []
        for item in value:
            status = str(item or "").strip()
            if not status:
                continue
            if len(status) > _STATUS_MAX:
                raise ValueError(f"status exceeds {_STATUS_MAX} characters")
            if status not in out:
                out.append(status)
        return out

    def to_scope(self) -> ReviewScope:
        session_range = None
        if self.session_range is not None:
            session_range = SessionRange(self.session_range.start, self.session_range.end)
        return ReviewScope(statuses=tuple(self.statuses), session_range=session_range)


class TextReplaceRequest(ReviewRequest):
    search_text: str = Field(..., min_length=1, max_length=_SEARCH_TEXT_MAX, alias="searchText")
    replace_text: str = Field(default="", max_length=_SEARCH_TEXT_MAX, alias="replaceText")

    @field_validator("search_text")
    @classmethod
    def validate_search_text(cls, value: str) -> str:
        if not (value or "").strip():
            raise ValueError("searchText cannot be empty or whitespace")
        return value.strip()

    @field_validator("replace_text", mode="before")
    @classmethod
    def normalize_replace_text(cls, value: Optional[str]) -> str:
        return "" if value is None else str(value).strip()


class ReviewRuleInfo(BaseModel):
    name: str
    description: str
    autoFix: bool
    targetTables: List[str]
    contextTables: List[str]
    sampleLimit: int
    parameters: List[str] = Field(default_factory=list)


class ReviewRulesResponse(BaseModel):
    success: bool = True
    rules: List[ReviewRuleInfo]


class ReviewFailureResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None
