"""
MCP Solana Liquidity Package

This package provides an MCP (Model Context Protocol) server that exposes Solana
DEX market data as tools for an LLM host. It fetches trading pairs from Raydium
and Orca, looks up pool accounts through the Solana RPC, and derives pool
statistics such as health score, fee APR and risk flags.

Main components:
- server.py: MCP server bootstrap and stdio transport wiring
- tools.py: Tool declarations, input schemas and the call dispatcher
- service.py: Liquidity data service (pair listing, pool lookup, pair search, stats)
- providers.py: DEX endpoint access and per-provider response mapping
- metrics.py: Derived pool metrics and risk buckets
"""

# MCP Solana Liquidity
