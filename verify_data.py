import asyncio
import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from adventure import AdventureSession, CommandType
from runtime.core import SessionConfig


async def verify(data_dir: Path, logger: logging.Logger) -> None:
    config = SessionConfig(data_dir=data_dir, search_dirs=[data_dir])
    async with AdventureSession.from_config(config) as session:
        logger.info("Loading scene database...")
        assert await session.scene_graph.initialize(), "Scene database failed to load"

        graph = session.scene_graph
        assert graph.scene_ids, "Scene database has no scenes"

        # Every Move must point at a scene that exists
        for scene_id in graph.scene_ids:
            scene = graph.get_scene(scene_id)
            for command in scene.commands_of(CommandType.MOVE):
                assert graph.get_scene(command.parameter) is not None, \
                    f"{scene_id}: Move to unknown scene {command.parameter}"

        logger.info(f"Checked {len(graph.scene_ids)} scenes.")


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")

    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("demos/data")

    try:
        asyncio.run(verify(data_dir, logger))
        logger.info("VERIFICATION SUCCESSFUL: All data loaded and validated.")
    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
