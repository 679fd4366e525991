import config


def groups_url(category_id: int) -> str:
    """Return the catalog endpoint listing every group in ``category_id``.

    Parameters
    ----------
    category_id: int
        TCGplayer category identifier (79 is Star Wars: Unlimited).

    Returns
    -------
    str
        ``{API_BASE}/{category_id}/groups``.
    """
    return f"{config.API_BASE}/{category_id}/groups"


def prices_csv_url(category_id: int, group_id: int) -> str:
    """Return the products-and-prices CSV endpoint for one group."""
    return f"{config.API_BASE}/{category_id}/{group_id}/ProductsAndPrices.csv"
