"""
Option catalog loading.
"""

from pathlib import Path

from tlshare.logging import get_logger
from tlshare.models import OptionCatalog

logger = get_logger('services.catalog')


def load_catalog(path: str | Path) -> OptionCatalog:
    """
    Load the option catalog from a JSON file.

    :param path: Path to the catalog JSON document
    :type path: str | Path
    :return: Parsed catalog
    :rtype: OptionCatalog
    """
    catalog_path = Path(path)
    catalog = OptionCatalog.model_validate_json(catalog_path.read_text(encoding="utf-8"))
    logger.info(
        f"Loaded catalog from {catalog_path.name}: "
        f"{len(catalog.characters)} characters, {len(catalog.weapons)} weapons, "
        f"{len(catalog.common_keys)} common keys, {len(catalog.summons)} summons"
    )
    return catalog
