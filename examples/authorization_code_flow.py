import asyncio
import contextlib
import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from coreason_oidc_client import (
    AuthRequestParams,
    ClientConfig,
    CoreasonOIDCError,
    Display,
    Prompt,
    TokenExchangerAsync,
)


async def main() -> None:
    """
    Walks through the authorization code flow against a real IdP.
    Includes:
    - Building the redirect URL
    - Exchanging the code pasted back from the browser
    - Fetching the UserInfo claims
    """
    print(">>> Starting Authorization Code Flow Example")

    config = ClientConfig(
        security_endpoint=os.environ.get("IDP_ENDPOINT", "https://auth.example.com/oidc"),
        client_id=os.environ.get("IDP_CLIENT_ID", "my-client"),
        redirect_url="http://localhost:8080/callback",
    )

    async with TokenExchangerAsync(config) as exchanger:
        url = exchanger.authorization_url(
            AuthRequestParams(
                scopes=["openid", "profile", "email"],
                state=os.urandom(8).hex(),
                nonce=os.urandom(8).hex(),
                display=Display.PAGE,
                prompt=Prompt.LOGIN,
                ui_locales=["en-US", "de-DE"],
            )
        )
        print(f">>> Open this URL in a browser:\n{url}")

        code = input(">>> Paste the 'code' parameter from the redirect: ").strip()
        try:
            tokens = await exchanger.exchange_code(code)
            print(f">>> Received {tokens.token_type} token, expires in {tokens.expires_in}s")

            claims = await exchanger.fetch_user_info(tokens.access_token)
            print(f">>> UserInfo claims: {sorted(claims) if isinstance(claims, dict) else claims}")
        except CoreasonOIDCError as e:
            print(f">>> Flow failed: {e}")


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
