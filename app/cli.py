"""
Interactive terminal interface for the prompt agent.

    python -m app.cli                      # interactive prompt loop
    python -m app.cli "Swap 1 SOL for USDC"  # run a single prompt and exit
"""

import argparse
import asyncio

from solana.exceptions import SolanaRpcException

from app.libs.containers import Container
from app.libs.logging_config import setup_logging
from app.routes.agent.application.service import AgentService
from app.routes.agent.domain.action import ActionRecord
from app.routes.agent.domain.exceptions import ActionExecutionError
from packages.solana.client import SolanaSettings
from packages.solana.exceptions import WalletConfigurationError

EXAMPLE_PROMPTS = [
    "Swap 1 SOL for USDC",
    "Launch a token called GrokCoin with 1M supply",
    "Transfer 0.5 SOL to [address]",
    "Mint an NFT with name AI Art and image https://...",
    "Transfer NFT [mint] to [address]",
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="solana-prompt-agent",
        description="Run natural-language prompts as Solana actions",
    )
    parser.add_argument(
        "prompt",
        nargs="?",
        default=None,
        help="Prompt to execute once (omit for the interactive loop)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for the agent's own logging (default: WARNING)",
    )
    return parser.parse_args(argv)


def format_action(action: ActionRecord, settings: SolanaSettings) -> str:
    lines = [
        f"   Type: {action.type.value if action.type else '-'}",
        f"   Decision: {action.decision}",
        f"   Status: {action.status.value}",
    ]
    if action.transaction_signature:
        lines.append(f"   Transaction: {settings.explorer_url(action.transaction_signature)}")
    if action.error:
        lines.append(f"   Error: {action.error}")
    return "\n".join(lines)


async def run_prompt(
    agent_service: AgentService, settings: SolanaSettings, prompt: str
) -> bool:
    print("\n⏳ Processing...")
    try:
        action = await agent_service.execute_prompt(prompt)
    except ActionExecutionError as e:
        print(f"\n❌ Error: {e.message}")
        failed = await agent_service.fetch_action(e.action_id)
        if failed is not None:
            print(format_action(failed, settings))
        return False

    print("\n✅ Action completed!")
    print(format_action(action, settings))
    return True


async def interactive_loop(agent_service: AgentService, settings: SolanaSettings) -> None:
    while True:
        try:
            prompt = await asyncio.to_thread(input, '\n🤖 Enter your prompt (or "exit" to quit): ')
        except EOFError:
            prompt = "exit"

        prompt = prompt.strip()
        if prompt.lower() == "exit":
            print("👋 Goodbye!")
            return
        if not prompt:
            continue
        await run_prompt(agent_service, settings, prompt)


async def main(argv=None, container: Container | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level.upper())

    container = container or Container()
    try:
        return await _run(args, container)
    except WalletConfigurationError as e:
        print(f"\n❌ Wallet error: {e}")
        return 1
    except SolanaRpcException as e:
        print(f"\n❌ Solana RPC error: {e.error_msg}")
        return 1
    finally:
        await container.solana_client().close()


async def _run(args: argparse.Namespace, container: Container) -> int:
    settings = container.solana_settings()
    agent_service = container.agent_service()
    wallet_service = container.wallet_service()

    if args.prompt:
        return 0 if await run_prompt(agent_service, settings, args.prompt) else 1

    print("🚀 Solana Prompt Agent CLI")
    print("━" * 40)
    print(f"📝 Wallet: {wallet_service.get_public_key()}")
    print(f"💰 Balance: {await wallet_service.get_balance():.4f} SOL")
    print("\n💡 Example prompts:")
    for example in EXAMPLE_PROMPTS:
        print(f'   - "{example}"')

    await interactive_loop(agent_service, settings)
    return 0


def run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
