# storescrape/cli/runner.py

"""Headless command implementations behind ``main.py``."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreCollection, StoreProfile
from storescrape.scraping.errors import ScrapeError, StoreCollectionError
from storescrape.scraping.pipeline import StorePipeline
from storescrape.scraping.selectors import FieldKind, suggest_selectors
from storescrape.services.search_aggregator import SearchAggregator
from storescrape.storage.file_manager import FileManager

logger = logging.getLogger("storescrape.cli")

# Status goes to stderr so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_stores(
    stores: StoreCollection,
    names_csv: str | None,
) -> list[StoreProfile]:
    """Pick the profiles to search.

    ``None`` selects every stored profile (disabled ones are skipped later
    by the aggregator). Unknown names raise ``SystemExit``.
    """
    if names_csv is None:
        return stores.stores

    requested = [n.strip() for n in names_csv.split(",") if n.strip()]
    unknown = [n for n in requested if stores.find(n) is None]
    if unknown:
        valid = ", ".join(s.name for s in stores)
        _err.print(
            f"[red]Unknown store(s): {escape(', '.join(unknown))}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    selected: list[StoreProfile] = []
    for name in requested:
        profile = stores.find(name)
        if profile is None:
            continue
        if not profile.enabled:
            logger.warning("Requested store '%s' is disabled", profile.name)
            _err.print(
                f"[yellow]Store '{escape(profile.name)}' is disabled "
                f"and will be skipped[/yellow]"
            )
        selected.append(profile)
    return selected


def _print_table(products: list[ProductRecord]) -> None:
    """Render products as a Rich table on stdout."""
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Store", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            escape(p.name[:60]),
            escape(p.price),
            escape(p.store_name),
            p.url,
        )

    Console().print(table)


def _emit(products: list[ProductRecord], output_format: str) -> None:
    if output_format == "table":
        _print_table(products)
        return
    json.dump(
        [p.to_dict() for p in products],
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")


async def cli_search(
    query: str,
    names_csv: str | None,
    output_format: str,
    export_path: str | None,
    file_manager: FileManager | None = None,
) -> int:
    """Search stored profiles and print results (0=found, 1=none)."""
    fm = file_manager if file_manager is not None else FileManager()
    config = fm.load_app_config()
    profiles = resolve_stores(fm.load_stores(), names_csv)

    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]stores={', '.join(p.name for p in profiles)}[/dim]"
    )

    aggregator = SearchAggregator(config)
    outcome = await aggregator.search_all(query, profiles)

    for store_name, message in outcome.errors.items():
        _err.print(f"[red]{escape(store_name)}: {escape(message)}[/red]")
    _err.print(f"[dim]{outcome.status}[/dim]")

    if not outcome.products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    if config.auto_save_results:
        path = fm.save_search_results(outcome.products)
        _err.print(f"[dim]Saved results → {path}[/dim]")
    if export_path is not None:
        csv_path = fm.export_csv(outcome.products, Path(export_path))
        _err.print(f"[dim]Exported CSV → {csv_path}[/dim]")

    _emit(outcome.products, output_format)
    return 0


def run_product_scrape(
    url: str,
    store_name: str,
    output_format: str,
    file_manager: FileManager | None = None,
) -> int:
    """Scrape a single product page with a stored profile."""
    fm = file_manager if file_manager is not None else FileManager()
    profile = fm.load_stores().find(store_name)
    if profile is None:
        _err.print(f"[red]Unknown store: {store_name}[/red]")
        return 1

    pipeline = StorePipeline(fm.load_app_config())
    try:
        record = pipeline.scrape_product(url, profile)
    except ScrapeError as exc:
        logger.error("Product scrape failed: %s", exc, exc_info=True)
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    if record is None:
        _err.print("[yellow]No product found on that page.[/yellow]")
        return 1
    _emit([record], output_format)
    return 0


def run_list_stores(file_manager: FileManager | None = None) -> int:
    """Print the stored profiles."""
    fm = file_manager if file_manager is not None else FileManager()
    stores = fm.load_stores()

    table = Table(title="Stores", show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="bold")
    table.add_column("Enabled", justify="center")
    table.add_column("Valid", justify="center")
    table.add_column("Search URL", overflow="fold", style="dim")
    table.add_column("Container")

    for idx, store in enumerate(stores):
        table.add_row(
            str(idx),
            escape(store.name),
            "[green]yes[/green]" if store.enabled else "[red]no[/red]",
            "[green]✓[/green]" if store.is_valid() else "[red]✗[/red]",
            store.search_url_pattern,
            store.container_selector,
        )

    Console().print(table)
    return 0


def run_suggest(kind: str) -> int:
    """Print candidate selectors for a field kind."""
    suggestions = suggest_selectors(kind)
    if not suggestions:
        valid = ", ".join(k.value for k in FieldKind)
        _err.print(f"[red]Unknown field kind: {kind}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1
    for selector in suggestions:
        sys.stdout.write(f"{selector}\n")
    return 0


def run_validate(file_manager: FileManager | None = None) -> int:
    """Strictly validate every stored profile (1 if any fails)."""
    fm = file_manager if file_manager is not None else FileManager()
    failures = 0
    for store in fm.load_stores():
        try:
            store.validate()
        except ScrapeError as exc:
            failures += 1
            _err.print(
                f"[red]✗ {escape(store.name)}: {escape(str(exc))}[/red]"
            )
        else:
            _err.print(f"[green]✓ {escape(store.name)}[/green]")
    return 1 if failures else 0


def run_backup(file_manager: FileManager | None = None) -> int:
    """Back up the stores file."""
    fm = file_manager if file_manager is not None else FileManager()
    try:
        path = fm.backup_stores()
    except FileNotFoundError as exc:
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    _err.print(f"[green]Backup written to {path}[/green]")
    return 0


# ── Store management ─────────────────────────────────────


def _read_profile_source(source: str) -> dict[str, object]:
    """Parse a profile given inline as JSON or as ``@path/to/file.json``."""
    if source.startswith("@"):
        text = Path(source[1:]).read_text(encoding="utf-8")
    else:
        text = source
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("store profile must be a JSON object")
    return data


def _load_for_edit(fm: FileManager) -> StoreCollection | None:
    """Stores to modify, or None when the file on disk is unreadable."""
    try:
        return fm.load_stores(strict=True)
    except (OSError, ValueError, AttributeError, StoreCollectionError) as exc:
        logger.error("Refusing to edit %s: %s", fm.stores_path, exc)
        _err.print(
            f"[red]Cannot edit {escape(str(fm.stores_path))}: "
            f"{escape(str(exc))}[/red]"
        )
        return None


def _save_edit(
    fm: FileManager, stores: StoreCollection, message: str,
) -> int:
    fm.save_stores(stores)
    _err.print(f"[green]{escape(message)}[/green]")
    return 0


def _locate(stores: StoreCollection, name: str) -> int | None:
    index = stores.index_of(name)
    if index is None:
        _err.print(f"[red]Unknown store: {escape(name)}[/red]")
    return index


def run_add_store(
    source: str, file_manager: FileManager | None = None,
) -> int:
    """Validate and append a new store profile, then save."""
    fm = file_manager if file_manager is not None else FileManager()
    try:
        profile = StoreProfile.from_dict(_read_profile_source(source))
    except (OSError, ValueError) as exc:
        _err.print(
            f"[red]Could not read store profile: {escape(str(exc))}[/red]"
        )
        return 1

    stores = _load_for_edit(fm)
    if stores is None:
        return 1
    try:
        stores.add(profile)
    except (ScrapeError, StoreCollectionError) as exc:
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    return _save_edit(fm, stores, f"Added store '{profile.name}'")


def run_remove_store(
    name: str, file_manager: FileManager | None = None,
) -> int:
    """Delete the named store profile, then save."""
    fm = file_manager if file_manager is not None else FileManager()
    stores = _load_for_edit(fm)
    if stores is None:
        return 1
    index = _locate(stores, name)
    if index is None:
        return 1
    removed = stores.remove(index)
    label = removed.name if removed is not None else name
    return _save_edit(fm, stores, f"Removed store '{label}'")


def _replace_store(
    fm: FileManager,
    stores: StoreCollection,
    index: int,
    profile: StoreProfile,
    message: str,
) -> int:
    try:
        stores.update(index, profile)
    except (ScrapeError, StoreCollectionError) as exc:
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    return _save_edit(fm, stores, message)


def run_set_enabled(
    name: str, enabled: bool, file_manager: FileManager | None = None,
) -> int:
    """Enable or disable the named store, then save."""
    fm = file_manager if file_manager is not None else FileManager()
    stores = _load_for_edit(fm)
    if stores is None:
        return 1
    index = _locate(stores, name)
    if index is None:
        return 1
    profile = replace(stores[index], enabled=enabled)
    state = "Enabled" if enabled else "Disabled"
    return _replace_store(
        fm, stores, index, profile, f"{state} store '{profile.name}'"
    )


def run_set_selector(
    name: str,
    kind: str,
    selector: str,
    file_manager: FileManager | None = None,
) -> int:
    """Replace one selector of the named store, then save.

    A suggestion from ``--suggest`` can be applied this way. The edited
    profile is validated before anything is written.
    """
    field_kind = FieldKind.parse(kind)
    if field_kind is None:
        valid = ", ".join(k.value for k in FieldKind)
        _err.print(f"[red]Unknown field kind: {escape(kind)}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    fm = file_manager if file_manager is not None else FileManager()
    stores = _load_for_edit(fm)
    if stores is None:
        return 1
    index = _locate(stores, name)
    if index is None:
        return 1
    profile = stores[index].with_selector(field_kind, selector)
    return _replace_store(
        fm,
        stores,
        index,
        profile,
        f"Set {field_kind.value} selector of '{profile.name}' to {selector}",
    )
