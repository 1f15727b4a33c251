# Unit tests for mcp-solana-liquidity
