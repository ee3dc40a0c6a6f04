from datetime import datetime, timezone
from pathlib import Path
from fastapi.templating import Jinja2Templates

from app.services.bundles.pricing import format_money


def _utcnow():
    return datetime.now(timezone.utc)


# Initialize templates once
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals["now"] = _utcnow
templates.env.filters["money"] = format_money
