import subprocess
import sys
import os
from pathlib import Path

# Add src to path for settings lookup
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from repricing_tool.config.settings import get_settings


def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)
    settings = get_settings()

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    print(f"Starting Repricing Tool API on {settings.api_host}:{settings.api_port}...")
    print(f"Database:    {settings.database_path}")
    print(f"Exports dir: {settings.exports_dir}")
    print(f"Backups dir: {settings.backups_dir}")
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "repricing_tool.api.main:app",
            "--host", settings.api_host,
            "--port", str(settings.api_port),
            "--reload"
        ], env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")

if __name__ == "__main__":
    main()
