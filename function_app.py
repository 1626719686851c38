
import os
import logging
import azure.functions as func

from src.function_blueprints.http_render_post import bp as render_post_bp
from src.function_blueprints.http_sitemap import bp as sitemap_bp

app = func.FunctionApp()


def _configure_logging() -> None:
    lvl = (os.getenv("AZURE_SDK_LOG_LEVEL") or "").upper()
    if lvl:
        level = getattr(logging, lvl, logging.INFO)
        logging.getLogger("azure").setLevel(level)
        logging.getLogger("azure.cosmos").setLevel(level)
    logging.getLogger("blogrender").setLevel(logging.INFO)


_configure_logging()

app.register_functions(render_post_bp)
app.register_functions(sitemap_bp)
