from pathlib import Path
import pytest
from dotenv import load_dotenv
from helpers import mark_by_dir

load_dotenv()


TESTS = Path(__file__).parent

def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "github_hooks" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "github_hooks" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "github_hooks" / "app", pytest.mark.e2e)
    mark_by_dir(items, TESTS / "github_hooks" / "shared", pytest.mark.unit)
