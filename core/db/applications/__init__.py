from core.db.applications.applications_store import ApplicationsStore

__all__ = ["ApplicationsStore"]
