# Per-tab storage key holding the session identifier
SESSION_STORAGE_KEY = "gx_session_id"

EVENT_CLICK = "click"
EVENT_SCROLL = "scroll"
EVENT_FORM_SUBMIT = "form_submit"
EVENT_TYPES = (EVENT_CLICK, EVENT_SCROLL, EVENT_FORM_SUBMIT)

SCROLL_THRESHOLDS = (25, 50, 75, 100)

# Optional column groups per event type
CLICK_FIELDS = ("element_tag", "element_text", "element_id", "element_class", "x_position", "y_position")
SUBMIT_FIELDS = ("element_tag", "element_id", "element_class")

ELEMENT_TEXT_LIMIT = 100
ELEMENT_CLASS_LIMIT = 200
