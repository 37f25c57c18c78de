import textwrap

import pytest

from tests.infrastructure import is_tree_sitter_available


@pytest.fixture
def skip_if_no_tree_sitter():
    """Skip test if Tree-sitter is not available."""
    if not is_tree_sitter_available():
        pytest.skip("Tree-sitter not available")


@pytest.fixture
def profile_card() -> str:
    """A template touching every top-level section."""
    return textwrap.dedent("""\
    #id profile-card-collie

    props
      name: string
      avatar?: string

    classes
      card = .rounded.shadow
      title = .text-lg.font-bold

    div.$card
      h2.$title | Hello {{ name }}
      @if (avatar)
        img.avatar
      @else
        span.placeholder | No avatar
      @for tag in tags
        span.tag | {{ tag }}
    """)
