from pydantic import BaseModel, Field, model_validator

from giftx.constants import CLICK_FIELDS, EVENT_TYPES, SCROLL_THRESHOLDS, SUBMIT_FIELDS


class VisitIn(BaseModel):
    session_id: str = Field(min_length=1, max_length=64)
    page_path: str = Field(min_length=1, max_length=512)
    referrer: str | None = None
    user_agent: str | None = None

    @model_validator(mode="after")
    def blank_referrer_is_direct(self):
        # document.referrer is "" for direct traffic; store it as NULL
        if not self.referrer:
            self.referrer = None
        return self


class InteractionEventIn(BaseModel):
    session_id: str = Field(min_length=1, max_length=64)
    page_path: str = Field(min_length=1, max_length=512)
    event_type: str
    element_tag: str | None = None
    element_text: str | None = Field(default=None, max_length=100)
    element_id: str | None = None
    element_class: str | None = Field(default=None, max_length=200)
    x_position: int | None = None
    y_position: int | None = None
    viewport_width: int | None = None
    viewport_height: int | None = None
    scroll_depth: int | None = None

    @model_validator(mode="after")
    def fields_match_event_type(self):
        """Only the optional field group belonging to event_type may be populated."""
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"event_type must be one of {', '.join(EVENT_TYPES)}")
        populated = {
            name
            for name in CLICK_FIELDS + ("scroll_depth",)
            if getattr(self, name) is not None
        }
        if self.event_type == "click":
            allowed = set(CLICK_FIELDS)
        elif self.event_type == "scroll":
            allowed = {"scroll_depth"}
            if self.scroll_depth not in SCROLL_THRESHOLDS:
                raise ValueError("scroll_depth must be one of 25, 50, 75, 100")
        else:
            allowed = set(SUBMIT_FIELDS)
        extra = sorted(populated - allowed)
        if extra:
            raise ValueError(f"{', '.join(extra)} not allowed for {self.event_type} events")
        return self


class TrackResponse(BaseModel):
    status: str = "ok"
    id: int | None = None
