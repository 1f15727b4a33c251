"""
Test Package for MCP Solana Liquidity

This package contains the test suite for the MCP Solana Liquidity server.

Test Structure:
- unit/: Pure functions (provider mappings, derived metrics)
- integration/: Tool calls through the dispatcher and the liquidity service,
  with the Solana RPC and DEX endpoints mocked
"""

# Test package for mcp-solana-liquidity
