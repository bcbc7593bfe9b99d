"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Tests never talk to the configured server database
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Import all models to register them with SQLAlchemy
from modules.kitchen.models import kitchen_models  # noqa: E402,F401
