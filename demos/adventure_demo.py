"""
Adventure Demo: Scene navigation over bundled data

Demonstrates:
- Loading the scene database through the asset cache
- Fallback lookup (the shop dataset lives in a search directory)
- Auto-triggered story on entering the first scene
- Shop, Talk and Move commands, with a fade transition between scenes

Run:
    python demos/adventure_demo.py [--log-level DEBUG]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adventure import AdventureSession
from runtime.core import SessionConfig, UIEvent, configure_logging

DATA_DIR = Path(__file__).parent / "data"


def build_config() -> SessionConfig:
    return SessionConfig(
        data_dir=DATA_DIR,
        search_dirs=[DATA_DIR / "shops"],
        preload=["AdventureDatabase", "Blacksmith"],
        use_fader=True,
        fade_duration=0.3,
    )


async def run_demo(config: SessionConfig) -> None:
    session = AdventureSession.from_config(config)
    session.event_bus.subscribe(
        UIEvent.PANEL_OPENED,
        lambda e: print(f"  > Panel opened: {e['kind']} (shop {e['payload'].shop_id})"),
        weak=False,
    )

    async with session:
        await session.start()
        scene = session.current_scene
        print(f"Now in: {scene.scene_name}")
        print(f"Story playing: {session.story.current_story}")

        for command in scene.commands:
            print(f"- {command.label}")
            await session.execute_command(command)

        print(f"Now in: {session.current_scene.scene_name}")
        print(f"Cached addresses: {', '.join(session.cache.addresses)}")


def main():
    """Run the adventure demo."""
    parser = argparse.ArgumentParser(description="Adventure runtime demo")
    parser.add_argument("--log-level", default=None, help="Overrides the config log level")
    args = parser.parse_args()

    config = build_config()
    if args.log_level:
        config.log_level = args.log_level

    configure_logging(config.log_level)
    asyncio.run(run_demo(config))


if __name__ == "__main__":
    main()
