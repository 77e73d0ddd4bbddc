# llm_playground_cli.py
import argparse
import asyncio
import logging

from llm_playground import settings
from llm_playground.app import RoundCallbacks
from llm_playground.catalog import DEFAULT_CATALOG
from llm_playground.errors import ConfigurationError
from llm_playground.runner import build_playground, env_credentials, targets_from_env
from llm_playground.types import Provider, TargetStatus


def _print_models(catalog):
    print("\n=== Providers ===")
    for info in catalog:
        print(f"{info.provider.value:10} {info.display_name}")
        for m in info.models:
            print(f"  - {m}")


def _parse_target(value: str):
    provider, _, model = value.partition(":")
    return provider.strip().lower(), model.strip() or None


def _add_requested_targets(playground, entries: list[str]):
    creds = env_credentials()
    for entry in entries:
        provider_name, model = _parse_target(entry)
        info = playground.catalog.get(provider_name)
        api_key, env_model = creds.get(info.provider, ("", None))
        if not api_key:
            raise ConfigurationError(f"No API key for {info.display_name}; set {info.provider.value.upper()}_API_KEY")
        playground.add_target(info.provider, model or env_model or playground.catalog.default_model(info.provider), api_key)


def _make_callbacks(verbose: bool, labels: dict) -> RoundCallbacks:
    def on_round_start(number, targets):
        print(f"\n=== ROUND {number}: {len(targets)} target(s) ===")

    def on_result(r):
        label = labels.get(r.target_id, r.target_id)
        status = "OK" if r.status is TargetStatus.succeeded else f"ERR: {r.error_message}"
        if verbose:
            print(f"[done] {label:40} {status}  {r.latency_ms or 0} ms")
        else:
            print(f"[done] {label}")

    return RoundCallbacks(on_round_start=on_round_start, on_result=on_result)


def _print_cards(rnd, labels: dict):
    for r in rnd:
        print("\n" + "=" * 80)
        print(labels.get(r.target_id, r.target_id))
        print("-" * 80)
        if r.status is TargetStatus.succeeded:
            print(r.text)
        else:
            print("ERROR:", r.error_message)


async def _run(prompt: str, args) -> int:
    playground = build_playground(timeout_s=args.timeout)

    try:
        if args.target:
            _add_requested_targets(playground, args.target)
        else:
            targets_from_env(playground.store)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 2

    targets = playground.store.targets()
    if not targets:
        print("No targets configured. Set OPENAI_API_KEY / ANTHROPIC_API_KEY / GEMINI_API_KEY or pass --target.")
        return 2

    labels = {
        t.id: f"{playground.catalog.get(t.provider).display_name} | {t.model}"
        for t in targets
    }
    playground.callbacks = _make_callbacks(args.verbose, labels)

    rnd = await playground.start_round(prompt)
    _print_cards(rnd, labels)
    return 1 if rnd.failed else 0


def main():
    ap = argparse.ArgumentParser(description="Send one prompt to up to three LLM providers in parallel")
    ap.add_argument("prompt", nargs="?", help="Prompt text (read from stdin prompt if omitted)")
    ap.add_argument(
        "--target",
        action="append",
        default=[],
        metavar="PROVIDER[:MODEL]",
        help=f"Target to query ({'/'.join(p.value for p in Provider)}); repeat up to {settings.MAX_TARGETS} times",
    )
    ap.add_argument("--timeout", type=float, default=None, help="Per-call timeout in seconds")
    ap.add_argument("--list-models", action="store_true", help="Print the provider/model catalog and exit")
    ap.add_argument("--verbose", action="store_true", help="Print per-target status and latency as results arrive")

    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, (settings.LOG_LEVEL or "WARNING").upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.list_models:
        _print_models(DEFAULT_CATALOG)
        raise SystemExit(0)

    prompt = (args.prompt or "").strip() or input("Prompt: ").strip()
    if not prompt:
        ap.error("prompt must not be empty")

    raise SystemExit(asyncio.run(_run(prompt, args)))


if __name__ == "__main__":
    main()
