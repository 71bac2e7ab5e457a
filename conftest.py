import os
import sys
from pathlib import Path

# Add project root to Python path for package imports
project_root = Path(__file__).parent

# Always add project root to sys.path for consistent imports
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Configure test environment: no real provider calls, quiet logs
for _key in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "PERPLEXITY_API_KEY"):
    os.environ.pop(_key, None)
os.environ.setdefault("TASKMASTER_LOG_LEVEL", "WARNING")
