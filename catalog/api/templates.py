from pathlib import Path
from fastapi.templating import Jinja2Templates
from catalog.core.config import settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.globals["catalog_prefix"] = settings.CATALOG_PREFIX
