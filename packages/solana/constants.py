# Common Solana token mints
SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"

TOKEN_MINTS = {
    "SOL": SOL_MINT,
    "USDC": USDC_MINT,
    "USDT": USDT_MINT,
}

TOKEN_DECIMALS = {
    SOL_MINT: 9,
    USDC_MINT: 6,
    USDT_MINT: 6,
}

# Jupiter API endpoints
JUPITER_QUOTE_API = "https://quote-api.jup.ag/v6/quote"
JUPITER_SWAP_API = "https://quote-api.jup.ag/v6/swap"

LAMPORTS_PER_SOL = 1_000_000_000

DEFAULT_SLIPPAGE_BPS = 50  # 0.5%
DEFAULT_DECIMALS = 9
NFT_DECIMALS = 0

DEFAULT_RPC_ENDPOINT = "https://api.devnet.solana.com"
DEFAULT_NETWORK = "devnet"
DEFAULT_COMMITMENT = "confirmed"

SUPPORTED_NETWORKS = ("devnet", "testnet", "mainnet-beta")
SUPPORTED_COMMITMENTS = ("processed", "confirmed", "finalized")

EXPLORER_TX_URL = "https://explorer.solana.com/tx/{signature}?cluster={network}"
