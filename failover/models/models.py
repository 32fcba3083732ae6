""" Models for the failover watchdog """
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class LivenessStatus(str, Enum):
    """Result of a single liveness probe against the Valkey server"""
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class ConfigStatus(str, Enum):
    """Whether the session manager block in context.xml is active or commented out"""
    ENABLED = "enabled"
    DISABLED = "disabled"


class EngineState(str, Enum):
    """
    States of the reconciliation engine.

    INIT - first tick after start-up.
    UP - server and configuration are both active.
    DOWN - server and configuration are both inactive.
    GOING_UP - configuration was re-enabled after the server came back.
    GOING_DOWN - configuration was disabled after the server failed.
    """
    INIT = "init"
    UP = "up"
    DOWN = "down"
    GOING_UP = "going_up"
    GOING_DOWN = "going_down"


class Action(str, Enum):
    """Side effect requested by a state transition"""
    ENABLE_CONFIG = "enable_config"
    DISABLE_CONFIG = "disable_config"
    SEND_ALERT = "send_alert"
    RESTART_TARGET = "restart_target"


class Transition(BaseModel):
    """ Outcome of one engine decision: the next state and the actions leading to it """
    model_config = ConfigDict(frozen=True)

    next_state: EngineState
    actions: Tuple[Action, ...] = ()


class AlertEnvelope(BaseModel):
    """ Data required to send the failure alert mail """
    sender: str
    sender_name: Optional[str] = None
    subject: str
    body: str
    recipients: List[str]
