from typing import Optional


class ServerError(Exception):
    pass

class BindFailure(ServerError):
    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Cannot listen on {address}: {reason}")

class PortInUse(BindFailure):
    def __init__(self, address: str):
        super().__init__(address, "address already in use")

class ShutdownTimeout(ServerError):
    def __init__(self, deadline: float, pending: Optional[int] = None):
        self.deadline = deadline
        self.pending = pending
        message = f"Shutdown did not complete within {deadline} seconds"
        if pending:
            message += f" ({pending} connection(s) forcibly closed)"
        super().__init__(message)
