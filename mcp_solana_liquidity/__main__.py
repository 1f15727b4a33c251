from mcp_solana_liquidity.server import main

main()
