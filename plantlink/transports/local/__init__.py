from plantlink.transports.local.transport import LocalChannel

__all__ = ["LocalChannel"]
