from __future__ import annotations

import logging
from typing import Callable, List

from .models import PostEntity
from .repositories import Repository
from .schemas import PostCreate

logger = logging.getLogger(__name__)

Seeder = Callable[[Repository], List[PostEntity]]

SAMPLE_POSTS: List[PostCreate] = [
    PostCreate(
        title="Getting Started Guide",
        content=(
            "<p>Welcome to your new BlogWiki! This guide will help you create, edit, "
            "and manage your content.</p>"
            "<h2>Creating Your First Page</h2>"
            "<p>Click the \"New Page\" button in the sidebar to start a blank page.</p>"
            "<h2>Organizing Your Content</h2>"
            "<p>Use categories to group related pages so readers can find them.</p>"
            "<ul>"
            "<li>Create logical categories for different topics</li>"
            "<li>Use descriptive titles that are easy to search</li>"
            "<li>Keep your content structure consistent</li>"
            "</ul>"
            "<h2>Rich Media Support</h2>"
            "<p>Upload images and embed code blocks to make pages more engaging.</p>"
            "<pre><code>// Example code block\n"
            "function createPage(title, content) {\n"
            "    return { title: title, content: content };\n"
            "}</code></pre>"
        ),
        category="Documentation",
        author="John Doe",
    ),
]


# PUBLIC_INTERFACE
def seed_sample_posts(repo: Repository) -> List[PostEntity]:
    """Create the demonstration posts through the normal create path and return them."""
    created = [repo.create_post(p) for p in SAMPLE_POSTS]
    logger.info("Seeded %d sample post(s)", len(created))
    return created
