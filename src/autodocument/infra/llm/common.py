from __future__ import annotations

from autodocument.domain.constants import APP_VERSION

USER_AGENT = f"Autodocument-Client/{APP_VERSION}"
APP_TITLE = "Autodocument"
