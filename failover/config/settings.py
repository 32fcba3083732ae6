""" Configuration settings for the failover watchdog """
import os
from typing import List
from pydantic import BaseModel, Field


DEFAULT_MAIL_TITLE = "[Watchdog] Valkey server failure detected"
DEFAULT_MAIL_BODY = (
    "<p>The Valkey session server is not responding.</p>"
    "<p>Session clustering has been disabled and the application server is being restarted.</p>"
)


def _env(name, default):
    return Field(default_factory=lambda: os.getenv(name, default))


class Settings(BaseModel):
    """ Configuration settings for the failover watchdog """
    VALKEY_HOST: str = _env("VALKEY_HOST", "localhost")
    VALKEY_PORT: int = _env("VALKEY_PORT", "6379")
    PROBE_TIMEOUT: float = _env("PROBE_TIMEOUT", "5.0")
    POLL_INTERVAL: float = _env("POLL_INTERVAL", "10.0")

    TOMCAT_BASE_PATH: str = _env("TOMCAT_BASE_PATH", "/usr/local/tomcat")
    CONFIG_FILE_PATH: str = "/conf/context.xml"
    CONFIG_MARKER: str = "org.redisson.tomcat.RedissonSessionManager"
    RESTART_SCRIPT_PATH: str = "/bin/wrapper.sh"

    ALERT_MAIL_HOST: str = _env("ALERT_MAIL_HOST", "localhost")
    ALERT_MAIL_PORT: int = _env("ALERT_MAIL_PORT", "25")
    ALERT_SENDER_EMAIL: str = _env("ALERT_SENDER_EMAIL", "watchdog@localhost")
    ALERT_SENDER_NAME: str = _env("ALERT_SENDER_NAME", "Watchdog Service")
    ALERT_EMAILS: str = _env("ALERT_EMAILS", "")
    ALERT_MAIL_TITLE: str = _env("ALERT_MAIL_TITLE", DEFAULT_MAIL_TITLE)
    ALERT_MAIL_BODY: str = _env("ALERT_MAIL_BODY", DEFAULT_MAIL_BODY)
    ALERT_SEND_ATTEMPTS: int = _env("ALERT_SEND_ATTEMPTS", "3")

    # 0 disables the metrics endpoint
    PROMETHEUS_PORT: int = _env("PROMETHEUS_PORT", "9108")
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    LOG_JSON: bool = _env("LOG_JSON", "false")

    model_config = {"validate_default": True}

    @property
    def config_file(self) -> str:
        """ Absolute path of the managed context.xml """
        return self.TOMCAT_BASE_PATH + self.CONFIG_FILE_PATH

    @property
    def restart_script(self) -> str:
        """ Absolute path of the application server restart script """
        return self.TOMCAT_BASE_PATH + self.RESTART_SCRIPT_PATH

    @property
    def alert_recipients(self) -> List[str]:
        return [email.strip() for email in self.ALERT_EMAILS.split(",") if email.strip()]
