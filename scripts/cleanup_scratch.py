from avatar_studio.config import settings
from avatar_studio.scratch import sweep_stale


def main() -> None:
    removed = sweep_stale(settings.scratch_retention_hours)
    print(f"Stale scratch files removed: {removed}")


if __name__ == "__main__":
    main()
