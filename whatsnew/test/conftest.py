"""
pytest configuration and shared fixtures.
Sets up Python path so 'from whatsnew...' imports resolve without installing.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to Python path
repo_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(repo_root))

from whatsnew.query.query_engine import QueryEngine  # noqa: E402
from whatsnew.records.record_store import RecordStore  # noqa: E402


SAMPLE_DOCUMENT = """\
# Sample release notes

Intro prose that is ignored.

## 1.0.0
Released: January 2020

### Language
#### Inline classes [Alpha]
Inline classes wrap a single value
without allocation.

- Declared with the inline modifier
- Erased at runtime

```kotlin
inline class Name(val s: String)
```

### Standard library
#### Result type
The Result type represents success or failure.

## 1.1.0
Released: June 2020

### Coroutines
#### Flow API [Stable]
Cold asynchronous streams with the Flow interface.

### Language
#### Fun interfaces [Beta]
SAM conversions for Kotlin interfaces.

## 1.2.0

### Standard library
#### UUID helpers [Experimental]
Adds uuid generation helpers.
"""


@pytest.fixture
def sample_document():
    """Small markdown document with three versions and five changes."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_store():
    """Record store loaded from the sample document."""
    return RecordStore.from_document(SAMPLE_DOCUMENT, source="sample.md")


@pytest.fixture
def sample_engine(sample_store):
    """Query engine over the sample store."""
    return QueryEngine(sample_store)


@pytest.fixture(scope="session")
def default_store():
    """Record store loaded from the embedded default document."""
    return RecordStore.from_default()


@pytest.fixture
def default_engine(default_store):
    """Query engine over the embedded default document."""
    return QueryEngine(default_store)
