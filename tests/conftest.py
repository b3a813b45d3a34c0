import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pagelogue.sources import HtmlPageAccessor
from pagelogue.storage import ExportHistoryManager, MemoryStore

CHATGPT_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Sorting lists in Python</title>
  <link rel="canonical" href="https://chatgpt.com/c/abc-123">
</head>
<body>
<main>
  <article data-testid="conversation-turn-1">
    <div data-message-author-role="user" data-message-id="msg-1">
      <div class="whitespace-pre-wrap">How do I   sort a list?</div>
    </div>
  </article>
  <article data-testid="conversation-turn-2">
    <div data-message-author-role="assistant" data-message-id="msg-2" data-message-model-slug="gpt-4o">
      <div class="markdown prose">
        <p>Use <code>sorted()</code>:</p>
        <pre><code class="language-python">nums = [3, 1, 2]
print(sorted(nums))</code></pre>
        <ul><li>Returns a new list</li><li>Accepts <code>key</code></li></ul>
      </div>
    </div>
  </article>
  <article data-testid="conversation-turn-3">
    <div data-message-author-role="system"><div class="markdown">System prompt</div></div>
  </article>
  <article data-testid="conversation-turn-4">
    <div data-message-author-role="assistant"><div class="markdown">   </div></div>
  </article>
</main>
</body>
</html>
"""

CLAUDE_PAGE = """<html>
<head><title>Claude</title></head>
<body>
  <div class="conversation-title">Debugging   a
     flaky test</div>
  <div data-testid="user-message" class="font-user-message">
    <div class="message-content"><p>Why does my test fail <em>sometimes</em>?</p></div>
    <time datetime="2024-05-01T10:00:00Z">10:00</time>
  </div>
  <div class="font-claude-message" data-is-streaming="false">
    <div class="message-content"><p>Probably a race condition.</p></div>
  </div>
</body>
</html>
"""

GEMINI_PAGE = """<html lang="de">
<head><title>Gemini</title></head>
<body>
  <div class="conversation-title">Quadratic formula</div>
  <user-query><div class="query-text">Solve x^2 - 4 = 0</div></user-query>
  <model-response>
    <message-content>
      <div class="markdown"><p>The roots are <span class="math-inline" data-math="x = \\pm 2">x=&plusmn;2</span>.</p></div>
    </message-content>
  </model-response>
</body>
</html>
"""

CLAUDE_URL = "https://claude.ai/chat/xyz-789"
GEMINI_URL = "https://gemini.google.com/app/gem_42"


class FailingAccessor:
    """Accessor whose every call blows up, like a detached page."""

    async def query_one(self, selector):
        raise RuntimeError("page detached")

    async def query_all(self, selector):
        raise RuntimeError("page detached")

    async def page_url(self):
        raise RuntimeError("page detached")

    async def page_language(self):
        raise RuntimeError("page detached")


@pytest.fixture
def chatgpt_accessor():
    return HtmlPageAccessor(CHATGPT_PAGE)


@pytest.fixture
def claude_accessor():
    return HtmlPageAccessor(CLAUDE_PAGE, url=CLAUDE_URL)


@pytest.fixture
def gemini_accessor():
    return HtmlPageAccessor(GEMINI_PAGE, url=GEMINI_URL)


@pytest.fixture
def failing_accessor():
    return FailingAccessor()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def history(memory_store):
    return ExportHistoryManager(memory_store)


@pytest.fixture
def chatgpt_page(tmp_path):
    path = tmp_path / "chatgpt.html"
    path.write_text(CHATGPT_PAGE, encoding="utf-8")
    return path
