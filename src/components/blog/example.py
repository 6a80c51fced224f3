"""
Example post document showing every content block type.

The Polish translation carries all block types; the English one is a short
subset. Both reference the ``tutorial`` and ``documentation`` categories,
which must exist before the document can be upserted.
"""

from __future__ import annotations

import secrets
from typing import Any

from src.domain.entities import BlogPostJSON

EXAMPLE_CATEGORIES = [
    ("tutorial", "Tutorial", "Poradnik"),
    ("documentation", "Documentation", "Dokumentacja"),
]

_CODE = (
    "from dataclasses import dataclass\n"
    "\n"
    "\n"
    "@dataclass\n"
    "class User:\n"
    "    id: str\n"
    "    name: str\n"
    "    email: str\n"
    "\n"
    "\n"
    "def get_user(repo, user_id: str) -> User | None:\n"
    "    return repo.get_by_id(user_id)\n"
)

_CONFIG_BEFORE = "DEBUG = False\nAPI_URL = 'http://localhost:8000'\nTIMEOUT = 5\n"
_CONFIG_AFTER = "DEBUG = True\nAPI_URL = 'https://api.example.com'\nTIMEOUT = 10\nRETRIES = 3\n"


def _polish_content() -> list[dict[str, Any]]:
    return [
        {
            "id": "1",
            "type": "banner",
            "variant": "info",
            "title": "Przykładowy artykuł",
            "content": "Ten post pokazuje wszystkie dostępne bloki treści.",
        },
        {"id": "2", "type": "heading", "level": 2, "content": "Podstawowe bloki"},
        {
            "id": "3",
            "type": "paragraph",
            "content": "Zwykły paragraf z <strong>pogrubieniem</strong>, "
            "<em>kursywą</em> i <a href=\"#\">linkiem</a>.",
        },
        {
            "id": "4",
            "type": "list",
            "style": "unordered",
            "items": ["Pierwszy punkt", "Drugi punkt", "Trzeci punkt"],
        },
        {
            "id": "5",
            "type": "quote",
            "content": "Prostota jest szczytem wyrafinowania.",
            "author": "Leonardo da Vinci",
        },
        {
            "id": "6",
            "type": "callout",
            "variant": "warning",
            "title": "Ważne",
            "content": "Pamiętaj o zapisaniu zmian przed zamknięciem.",
        },
        {"id": "7", "type": "divider"},
        {
            "id": "8",
            "type": "image",
            "src": "/images/blog/example-diagram.png",
            "alt": "Diagram architektury",
            "caption": "Architektura aplikacji",
        },
        {"id": "9", "type": "heading", "level": 2, "content": "Bloki techniczne"},
        {"id": "10", "type": "code", "language": "python", "filename": "users.py", "code": _CODE},
        {
            "id": "11",
            "type": "terminal",
            "title": "Instalacja projektu",
            "commands": [
                {"command": "git clone https://github.com/user/repo.git"},
                {"command": "cd repo && pip install -e .", "output": "Successfully installed repo"},
                {"command": "uvicorn src.api.main:app", "output": "Uvicorn running on http://127.0.0.1:8000"},
            ],
        },
        {
            "id": "12",
            "type": "diff",
            "filename": "settings.py",
            "language": "python",
            "before": _CONFIG_BEFORE,
            "after": _CONFIG_AFTER,
        },
        {
            "id": "13",
            "type": "api",
            "method": "POST",
            "endpoint": "/api/users",
            "description": "Tworzy nowego użytkownika w systemie.",
            "params": [
                {"name": "name", "type": "string", "required": True, "description": "Imię użytkownika"},
                {"name": "email", "type": "string", "required": True, "description": "Adres email"},
                {"name": "role", "type": "string", "required": False, "description": "Rola (domyślnie: user)"},
            ],
            "body": '{\n  "name": "Jan Kowalski",\n  "email": "jan@example.com"\n}',
            "response": '{\n  "id": "usr_123",\n  "name": "Jan Kowalski"\n}',
        },
        {
            "id": "14",
            "type": "filetree",
            "title": "Struktura projektu",
            "items": [
                {
                    "name": "src",
                    "type": "folder",
                    "children": [
                        {
                            "name": "api",
                            "type": "folder",
                            "children": [
                                {"name": "main.py", "type": "file", "highlight": True},
                                {"name": "deps.py", "type": "file"},
                            ],
                        },
                        {"name": "domain", "type": "folder", "children": [{"name": "blocks.py", "type": "file"}]},
                    ],
                },
                {"name": "pyproject.toml", "type": "file"},
                {"name": "rules.yaml", "type": "file"},
            ],
        },
        {"id": "15", "type": "embed", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "provider": "youtube"},
        {"id": "16", "type": "heading", "level": 2, "content": "Wzory matematyczne"},
        {"id": "17", "type": "math", "formula": "E = mc^2", "caption": "Równoważność masy i energii"},
        {
            "id": "18",
            "type": "math",
            "formula": "\\sum_{i=1}^{n} i = \\frac{n(n+1)}{2}",
            "caption": "Suma ciągu arytmetycznego",
        },
        {"id": "19", "type": "heading", "level": 2, "content": "Dane i statystyki"},
        {
            "id": "20",
            "type": "table",
            "columns": [
                {"key": "feature", "header": "Funkcja", "color": "#3b82f6"},
                {"key": "free", "header": "Darmowy", "color": "#22c55e"},
                {"key": "pro", "header": "Pro", "color": "#f59e0b"},
            ],
            "rows": [
                {"feature": "Użytkownicy", "free": "10", "pro": "Bez limitu"},
                {"feature": "Projekty", "free": "3", "pro": "Bez limitu"},
                {"feature": "Wsparcie", "free": "Email", "pro": "24/7 Chat"},
            ],
            "striped": True,
            "caption": "Porównanie planów",
        },
        {
            "id": "21",
            "type": "stats",
            "columns": 4,
            "items": [
                {"value": 10000, "label": "Użytkowników", "suffix": "+", "color": "#3b82f6"},
                {"value": 99.9, "label": "Dostępność", "suffix": "%", "color": "#22c55e"},
                {"value": 50, "label": "Krajów", "color": "#8b5cf6"},
                {"value": "24", "label": "Wsparcie", "suffix": "/7", "color": "#f59e0b"},
            ],
        },
        {
            "id": "22",
            "type": "comparison",
            "leftTitle": "Tradycyjne podejście",
            "rightTitle": "Nowoczesne rozwiązanie",
            "leftItems": ["Ręczna konfiguracja", "Długi czas wdrożenia", "Trudne skalowanie"],
            "rightItems": ["Automatyczna konfiguracja", "Szybkie wdrożenie", "Łatwe skalowanie"],
            "leftColor": "#ef4444",
            "rightColor": "#22c55e",
        },
        {"id": "23", "type": "heading", "level": 2, "content": "Schemat procesu"},
        {
            "id": "24",
            "type": "flowchart",
            "title": "Proces rejestracji",
            "direction": "TB",
            "nodes": [
                {"id": "start", "label": "Start", "type": "start", "color": "#22c55e"},
                {"id": "form", "label": "Formularz", "type": "process", "color": "#3b82f6"},
                {"id": "validate", "label": "Walidacja", "type": "decision", "color": "#f59e0b"},
                {"id": "error", "label": "Błąd", "type": "process", "color": "#ef4444"},
                {"id": "save", "label": "Zapis", "type": "data", "color": "#8b5cf6"},
                {"id": "end", "label": "Koniec", "type": "end", "color": "#22c55e"},
            ],
            "edges": [
                {"from": "start", "to": "form"},
                {"from": "form", "to": "validate"},
                {"from": "validate", "to": "error", "label": "Nie"},
                {"from": "validate", "to": "save", "label": "Tak"},
                {"from": "error", "to": "form"},
                {"from": "save", "to": "end"},
            ],
        },
        {"id": "25", "type": "heading", "level": 2, "content": "Sprawdź swoją wiedzę"},
        {
            "id": "26",
            "type": "quiz",
            "title": "Quiz o Pythonie",
            "questions": [
                {
                    "question": "Co zwraca len([1, 2, 3])?",
                    "options": ["2", "3", "4"],
                    "correctIndex": 1,
                    "explanation": "Lista ma trzy elementy.",
                },
                {
                    "question": "Jak oznaczyć pole opcjonalne w adnotacji typu?",
                    "options": ["str | None", "str?", "optional str"],
                    "correctIndex": 0,
                    "explanation": "Unia z None oznacza wartość opcjonalną.",
                },
            ],
        },
    ]


def _english_content() -> list[dict[str, Any]]:
    return [
        {
            "id": "1",
            "type": "banner",
            "variant": "info",
            "title": "Example article",
            "content": "This post shows the available content blocks.",
        },
        {"id": "2", "type": "heading", "level": 2, "content": "Basic blocks"},
        {
            "id": "3",
            "type": "paragraph",
            "content": "A regular paragraph with <strong>bold</strong>, "
            "<em>italic</em> and <a href=\"#\">a link</a>.",
        },
        {"id": "4", "type": "list", "style": "unordered", "items": ["First item", "Second item", "Third item"]},
        {
            "id": "5",
            "type": "quote",
            "content": "Simplicity is the ultimate sophistication.",
            "author": "Leonardo da Vinci",
        },
        {
            "id": "6",
            "type": "callout",
            "variant": "warning",
            "title": "Important",
            "content": "Remember to save changes before closing.",
        },
        {"id": "7", "type": "divider"},
        {"id": "8", "type": "code", "language": "python", "filename": "hello.py", "code": "print('Hello World')\n"},
        {
            "id": "9",
            "type": "terminal",
            "title": "Installation",
            "commands": [{"command": "pip install -e .", "output": "Successfully installed"}],
        },
        {
            "id": "10",
            "type": "stats",
            "columns": 3,
            "items": [
                {"value": 10000, "label": "Users", "suffix": "+", "color": "#3b82f6"},
                {"value": 99.9, "label": "Uptime", "suffix": "%", "color": "#22c55e"},
                {"value": 24, "label": "Support", "suffix": "/7", "color": "#f59e0b"},
            ],
        },
    ]


def generate_example_post(post_id: str | None = None) -> BlogPostJSON:
    """A published, featured example post in ``pl`` and ``en``."""
    slugs = [slug for slug, _, _ in EXAMPLE_CATEGORIES]
    return BlogPostJSON.model_validate(
        {
            "postId": post_id or secrets.token_urlsafe(6),
            "translations": [
                {
                    "locale": "pl",
                    "slug": "przykladowy-post",
                    "title": "Przykładowy wpis - wszystkie bloki",
                    "excerpt": "Demonstracja wszystkich dostępnych bloków treści.",
                    "content": _polish_content(),
                    "categories": slugs,
                    "badgeText": "Kompletny przewodnik",
                    "badgeColor": "#8b5cf6",
                },
                {
                    "locale": "en",
                    "slug": "example-post",
                    "title": "Example post - all blocks",
                    "excerpt": "Demonstration of the available content blocks.",
                    "content": _english_content(),
                    "categories": slugs,
                    "badgeText": "Complete guide",
                    "badgeColor": "#8b5cf6",
                },
            ],
            "coverImage": "/images/blog/example.jpg",
            "featured": True,
            "published": True,
            "authorName": "Admin",
        }
    )
