from __future__ import annotations

import os
from dataclasses import dataclass


def parse_hidden_commands(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated list of command names, dropping blanks."""
    if raw is None:
        return ()
    return tuple(name.strip() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class Config:
    """Bot configuration loaded from environment variables."""

    homeserver: str
    bot_user: str
    bot_password: str
    bot_name: str = "helpbot"
    bot_alias: str | None = None
    hidden_commands: tuple[str, ...] = ()
    reply_in_private: bool = False
    http_endpoint_enabled: bool = True
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    login_max_retries: int = 5
    adapter_name: str = "matrix"

    @property
    def robot_name(self) -> str:
        """Name used in place of the generic invocation token."""
        return self.bot_alias or self.bot_name

    @classmethod
    def from_env(cls) -> Config:
        """Create a Config from environment variables."""
        return cls(
            homeserver=os.environ["MATRIX_HOMESERVER"],
            bot_user=os.environ["MATRIX_USER"],
            bot_password=os.environ["MATRIX_PASSWORD"],
            bot_name=os.environ.get("HELPBOT_NAME", "helpbot"),
            bot_alias=os.environ.get("HELPBOT_ALIAS") or None,
            hidden_commands=parse_hidden_commands(
                os.environ.get("HELPBOT_HELP_HIDDEN_COMMANDS")
            ),
            reply_in_private=bool(
                os.environ.get("HELPBOT_HELP_REPLY_IN_PRIVATE")
            ),
            http_endpoint_enabled="HELPBOT_HELP_DISABLE_HTTP" not in os.environ,
            http_host=os.environ.get("HELPBOT_HTTP_HOST", "0.0.0.0"),
            http_port=int(os.environ.get("HELPBOT_HTTP_PORT", "8080")),
            login_max_retries=int(os.environ.get("LOGIN_MAX_RETRIES", "5")),
        )

    def print_config(self) -> None:
        """Log the configuration at startup."""
        print(f"[config] homeserver={self.homeserver}")
        print(f"[config] bot_user={self.bot_user}")
        print(f"[config] bot_name={self.bot_name}")
        print(f"[config] bot_alias={self.bot_alias or '(none)'}")
        print(f"[config] hidden_commands={','.join(self.hidden_commands)}")
        print(f"[config] reply_in_private={self.reply_in_private}")
        print(f"[config] http_endpoint_enabled={self.http_endpoint_enabled}")
        if self.http_endpoint_enabled:
            print(f"[config] http_listen={self.http_host}:{self.http_port}")
        print(f"[config] login_max_retries={self.login_max_retries}")
