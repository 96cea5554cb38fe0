from .orchestrator import SessionOptions, SessionOrchestrator

__all__ = ["SessionOptions", "SessionOrchestrator"]
