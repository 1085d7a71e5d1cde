from plantlink.transports.cloud.transport import CloudChannel

__all__ = ["CloudChannel"]
