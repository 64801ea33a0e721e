"""
Allow running as: python -m storycase
"""
import uvicorn

from storycase.core.config import get_settings
from storycase.main import create_app


def main() -> None:
    settings = get_settings()
    app = create_app()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        reload=False,
        workers=1,
    )


if __name__ == "__main__":
    main()
