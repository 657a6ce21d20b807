#!/usr/bin/env python3
"""Terminal client for the Ranna Banna recipe finder.

Search recipes, read a recipe in English or Bengali, translate it, and keep
a local favorites list, without a browser.

Usage:
    python query.py "Chicken Biryani"
    python query.py --lang bn "Lunch"                  # Bengali names, ingredients and steps
    python query.py --categories                       # List browse categories
    python query.py --detail 2 "Dessert"               # Full recipe for result #2
    python query.py --detail 1 --translate hi "Dal"    # Detail with Hindi translation overlay
    python query.py --favorite 1 "Beef Tehari"         # Toggle result #1 in favorites
    python query.py --favorites                        # Show saved favorites
    python query.py --favorites --detail 1             # Full recipe of favorite #1
    python query.py --save-images out/ "Pitha"         # Write generated images to disk
    python query.py --debug "Khichuri"                 # Dump full JSON

Features:
- Recipes rendered as rich tables and markdown
- Tutorial link with a "Suggested" badge for non-exact matches
- Favorites persisted to the local key-value store (FAVORITES_FILE)
- Errors shown as user-facing messages with a retry hint
"""

import asyncio
import base64
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from ranna_banna.models.models import CATEGORIES, Recipe
from ranna_banna.services.translation import translate_recipe
from ranna_banna.state.favorites import Favorites, create_storage
from ranna_banna.state.search import SearchSession
from ranna_banna.utils.config import config
from ranna_banna.utils.errors import RecipeServiceError
from ranna_banna.utils.logger import logger

console = Console()

LABELS = {
    "en": {
        "results": "Search Results",
        "favorites": "Bookmarked Recipes",
        "ingredients": "Ingredients",
        "instructions": "Instructions",
        "tutorial": "Watch Tutorial",
        "suggested": "Suggested",
        "no_results": "No recipes found. Try a different search!",
        "no_favorites": "You have no bookmarked recipes.",
        "categories": "Browse by category",
    },
    "bn": {
        "results": "অনুসন্ধানের ফলাফল",
        "favorites": "বুকমার্ক করা রেসিপি",
        "ingredients": "উপকরণ",
        "instructions": "প্রস্তুত প্রণালী",
        "tutorial": "টিউটোরিয়াল দেখুন",
        "suggested": "প্রস্তাবিত",
        "no_results": "কোনো রেসিপি খুঁজে পাওয়া যায়নি। অন্য কিছু দিয়ে চেষ্টা করুন!",
        "no_favorites": "আপনার কোনো বুকমার্ক করা রেসিপি নেই।",
        "categories": "বিভাগ থেকে ব্রাউজ করুন",
    },
}


def render_recipe_list(
    title: str, recipes: list[Recipe], favorites: Favorites, language: str, empty_message: str
) -> None:
    """Print recipes as a numbered table (the card grid of a UI)."""
    if not recipes:
        console.print(f"[yellow]{empty_message}[/yellow]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("♥", justify="center")
    table.add_column("Category", style="bold orange3")
    table.add_column("Name")
    for idx, recipe in enumerate(recipes, start=1):
        heart = "[red]♥[/red]" if favorites.is_favorite(recipe.id) else ""
        table.add_row(str(idx), heart, recipe.category, recipe.display_name(language))
    console.print(table)


def render_recipe_detail(
    recipe: Recipe,
    favorites: Favorites,
    language: str,
    ingredients: Optional[list[str]] = None,
    instructions: Optional[list[str]] = None,
) -> None:
    """Print one recipe: name, category, tutorial link, ingredients, numbered steps.

    ingredients/instructions override the recipe's own lists (translation overlay).
    """
    labels = LABELS[language]
    ingredients = ingredients if ingredients is not None else recipe.ingredients_for(language)
    instructions = instructions if instructions is not None else recipe.steps_for(language)

    lines = [f"# {recipe.display_name(language)}", f"**{recipe.category}**", ""]
    if favorites.is_favorite(recipe.id):
        lines.append("♥ Favorited\n")
    if recipe.has_tutorial:
        badge = f" _({labels['suggested']})_" if recipe.youtube_link_is_suggested else ""
        lines.append(f"[{labels['tutorial']}]({recipe.youtube_link}){badge}\n")

    lines.append(f"## {labels['ingredients']}")
    lines.extend(f"- {item}" for item in ingredients)
    lines.append("")
    lines.append(f"## {labels['instructions']}")
    lines.extend(f"{idx}. {step}" for idx, step in enumerate(instructions, start=1))

    console.print(Markdown("\n".join(lines)))


def save_images(recipes: list[Recipe], directory: str) -> None:
    """Write each recipe's generated image to directory as <n>-<name>.<ext>."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    for idx, recipe in enumerate(recipes, start=1):
        header, encoded = recipe.image_base64.split(",", 1)
        extension = "png" if "image/png" in header else "jpg"
        slug = "".join(c if c.isalnum() else "-" for c in recipe.name_en.lower()).strip("-")
        path = out_dir / f"{idx:02d}-{slug}.{extension}"
        path.write_bytes(base64.b64decode(encoded))
        logger.info(f"✓ Saved image: {path}")


def pick(recipes: list[Recipe], number: int) -> Recipe:
    if not 1 <= number <= len(recipes):
        console.print(f"[red]✗ No recipe #{number} (have {len(recipes)})[/red]")
        sys.exit(1)
    return recipes[number - 1]


async def run_query(
    query: Optional[str],
    language: str,
    debug: bool = False,
    detail: Optional[int] = None,
    translate: Optional[str] = None,
    favorite: Optional[int] = None,
    show_favorites: bool = False,
    images_dir: Optional[str] = None,
) -> None:
    """Execute one search (or favorites view) and print the result."""
    favorites = Favorites(create_storage())
    labels = LABELS[language]

    if show_favorites:
        recipes = favorites.items
        title = labels["favorites"]
        empty_message = labels["no_favorites"]
    else:
        session = SearchSession()
        try:
            with console.status(f"Cooking up recipes for \"{query}\"..."):
                recipes = await session.search(query) or []
        except ValidationError:
            console.print("[red]✗ Please enter a search query.[/red]")
            sys.exit(1)
        except RecipeServiceError as e:
            console.print(f"[red]✗ {e}[/red]")
            console.print("[dim]Run the same command again to retry.[/dim]")
            sys.exit(1)
        title = f"{labels['results']}: {query}"
        empty_message = labels["no_results"]

    if debug:
        console.print_json(data=[recipe.model_dump(exclude={"image_base64"}) for recipe in recipes])

    if favorite is not None:
        recipe = pick(recipes, favorite)
        added = favorites.toggle(recipe)
        console.print(f"{'♥ Added to' if added else '✓ Removed from'} favorites: {recipe.display_name(language)}")

    if images_dir and recipes:
        save_images(recipes, images_dir)

    if detail is None:
        render_recipe_list(title, recipes, favorites, language, empty_message)
        return

    recipe = pick(recipes, detail)
    if not translate:
        render_recipe_detail(recipe, favorites, language)
        return

    try:
        with console.status(f"Translating into {translate}..."):
            translated = await translate_recipe(recipe, translate)
    except RecipeServiceError as e:
        console.print(f"[red]✗ {e}[/red]")
        render_recipe_detail(recipe, favorites, language)
        return
    render_recipe_detail(recipe, favorites, language, translated.ingredients, translated.instructions)


def print_categories(language: str) -> None:
    console.print(f"[bold]{LABELS[language]['categories']}[/bold]")
    for category in CATEGORIES:
        console.print(f"  • {category}")


def _int_flag(flag: str, value: Optional[str]) -> int:
    if value is None or not value.isdigit():
        print(f"Error: {flag} requires a recipe number")
        sys.exit(1)
    return int(value)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python query.py [--lang en|bn] [--detail N] [--translate LANG] [--favorite N]")
        print("                       [--save-images DIR] [--debug] \"<query>\"")
        print("       python query.py --favorites [--detail N] [--lang en|bn]")
        print("       python query.py --categories")
        print("")
        print("Examples:")
        print("  python query.py \"Chicken Biryani\"")
        print("  python query.py --lang bn \"Lunch\"")
        print("  python query.py --detail 1 --translate hi \"Dal\"")
        sys.exit(1)

    language = config.DEFAULT_LANGUAGE
    debug_mode = False
    detail = None
    translate = None
    favorite = None
    show_favorites = False
    show_categories = False
    images_dir = None
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        value = sys.argv[argv_start + 1] if argv_start + 1 < len(sys.argv) else None
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag == "--favorites":
            show_favorites = True
            argv_start += 1
        elif flag == "--categories":
            show_categories = True
            argv_start += 1
        elif flag == "--lang":
            if value not in ("en", "bn"):
                print("Error: --lang must be 'en' or 'bn'")
                sys.exit(1)
            language = value
            argv_start += 2
        elif flag == "--detail":
            detail = _int_flag(flag, value)
            argv_start += 2
        elif flag == "--favorite":
            favorite = _int_flag(flag, value)
            argv_start += 2
        elif flag == "--translate":
            if not value:
                print("Error: --translate requires a language")
                sys.exit(1)
            translate = value
            argv_start += 2
        elif flag == "--save-images":
            if not value:
                print("Error: --save-images requires a directory")
                sys.exit(1)
            images_dir = value
            argv_start += 2
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if show_categories:
        print_categories(language)
        sys.exit(0)

    # Join all arguments after flags as the query (handles queries with spaces)
    query = " ".join(sys.argv[argv_start:])
    if not show_favorites and not query.strip():
        print("Error: No query provided")
        sys.exit(1)

    try:
        asyncio.run(
            run_query(
                query,
                language,
                debug=debug_mode,
                detail=detail,
                translate=translate,
                favorite=favorite,
                show_favorites=show_favorites,
                images_dir=images_dir,
            )
        )
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        sys.exit(0)
