"""Process configuration for the Solana pairs & liquidity server."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from the .env file at the repository root
dotenv_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=dotenv_path)

SERVER_NAME = "solana-pairs-liquidity-mcp"
SERVER_VERSION = "1.0.0"

SOLANA_RPC_URL = os.getenv("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com")

# --- DEX endpoints ---
RAYDIUM_PAIRS_URL = "https://api.raydium.io/v2/main/pairs"
ORCA_WHIRLPOOLS_URL = "https://api.orca.so/v1/whirlpool/list"

DEFAULT_PAIR_LIMIT = 20
MAX_PAIR_LIMIT = 100
RELATED_PAIRS_LIMIT = 10
