from dependency_injector import containers, providers

from app.routes.agent.application.core import IntentClassifier
from app.routes.agent.application.service import AgentService
from app.routes.agent.infra.repository import ActionRepository
from app.routes.wallet.application.service import WalletService
from packages.doppler.client import get_int_secret, get_secret
from packages.llm.client import ChatCompletionClient
from packages.solana.client import SolanaSettings, create_solana_client, load_wallet
from packages.solana.nft import NFTOperations
from packages.solana.swap import JupiterSwapProvider, PlaceholderSwapProvider
from packages.solana.token import TokenOperations


class Container(containers.DeclarativeContainer):
    # NOTE: 라우트는 __init__.py 없는 네임스페이스 패키지이므로 모듈 단위로 wiring
    wiring_config = containers.WiringConfiguration(
        modules=[
            "app.routes.agent.interface.controller",
            "app.routes.wallet.interface.controller",
        ]
    )

    solana_settings = providers.Singleton(SolanaSettings.from_secrets)
    solana_client = providers.Singleton(create_solana_client, settings=solana_settings)
    wallet = providers.Singleton(load_wallet)

    llm_client = providers.Singleton(ChatCompletionClient.from_secrets)

    token_ops = providers.Singleton(TokenOperations, client=solana_client, wallet=wallet)
    nft_ops = providers.Singleton(NFTOperations, client=solana_client, wallet=wallet)
    swap_provider = providers.Selector(
        providers.Callable(get_secret, "SWAP_PROVIDER", "placeholder"),
        placeholder=providers.Singleton(
            PlaceholderSwapProvider, client=solana_client, wallet=wallet
        ),
        jupiter=providers.Singleton(
            JupiterSwapProvider, client=solana_client, wallet=wallet
        ),
    )

    # NOTE: 액션 기록은 프로세스 수명 동안 유지되어야 하므로 Singleton
    action_repo = providers.Singleton(
        ActionRepository,
        max_records=providers.Callable(get_int_secret, "ACTION_STORE_MAX_RECORDS", 0),
    )
    intent_classifier = providers.Factory(IntentClassifier, llm_client=llm_client)

    agent_service = providers.Factory(
        AgentService,
        action_repo=action_repo,
        intent_classifier=intent_classifier,
        token_ops=token_ops,
        nft_ops=nft_ops,
        swap_provider=swap_provider,
    )
    wallet_service = providers.Factory(WalletService, wallet=wallet, token_ops=token_ops)
