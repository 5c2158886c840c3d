"""REST API.

    from whateat.api import create_app
    app = create_app(app_config, env_config)
"""

from .app import create_app

__all__ = ["create_app"]
