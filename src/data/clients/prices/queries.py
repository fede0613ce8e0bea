"""GraphQL queries for the asset pricing API."""


class PriceQueries:
    """GraphQL query definitions for USD asset prices."""

    # Latest USD price of one asset
    ASSET_PRICE_QUERY = """
    query GetAssetPrice($address: String!, $chainId: Int!) {
        assetByAddress(address: $address, chainId: $chainId) {
            address
            symbol
            decimals
            priceUsd
        }
    }
    """

    # Hourly USD price history of one asset over a window
    ASSET_PRICE_HISTORY_QUERY = """
    query GetAssetPriceHistory(
        $address: String!
        $chainId: Int!
        $options: TimeseriesOptions
    ) {
        assetByAddress(address: $address, chainId: $chainId) {
            address
            symbol
            historicalPriceUsd(options: $options) {
                x
                y
            }
        }
    }
    """
