import os
from typing import Mapping, Optional
from pydantic import BaseModel

DEFAULT_PORT = "8080"
PORT_ENV_VAR = "PORT"


class ServerConfig(BaseModel):
    """Bind settings for the liveness listener."""
    port: str = DEFAULT_PORT
    host: str = ""  # Empty host listens on every interface

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build the config from the process environment.
        
        An unset or empty PORT falls back to 8080; any other value is used verbatim.
        """
        if environ is None:
            environ = os.environ
        return cls(port=environ.get(PORT_ENV_VAR) or DEFAULT_PORT)
