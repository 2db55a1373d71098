"""GraphQL documents for the Morpho API, paged by (first, skip)."""

MARKETS_QUERY = """
query Markets($first: Int!, $skip: Int!, $chainId: Int!) {
  markets(first: $first, skip: $skip, where: { chainId_in: [$chainId] }) {
    items {
      uniqueKey
      lltv
      loanAsset { symbol }
      collateralAsset { symbol }
    }
  }
}
"""

MARKET_POSITIONS_QUERY = """
query MarketPositions($first: Int!, $skip: Int!, $marketKey: String!) {
  marketPositions(
    first: $first
    skip: $skip
    where: { marketUniqueKey_in: [$marketKey] }
  ) {
    items {
      user { address }
      state {
        borrowAssetsUsd
        collateralUsd
      }
    }
  }
}
"""
