"""SQLAlchemy Base class for all models."""
from complaintdesk.models.base.base_model import Base


def import_models():
    """Import all models to register them with SQLAlchemy."""
    import complaintdesk.models  # noqa: F401


# Import models on module load
import_models()

__all__ = ["Base", "import_models"]
