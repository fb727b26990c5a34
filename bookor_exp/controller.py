import os
import subprocess
import sys
import time
import webbrowser


def run_streamlit():
    # Run from the app directory so relative asset paths and flat imports resolve.
    base_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(base_dir)

    main_file = os.path.join(base_dir, "main.py")
    if not os.path.exists(main_file):
        print("main.py not found next to controller.py")
        sys.exit(1)

    port = os.getenv("BOOKOR_PORT", "8501")
    command = [sys.executable, "-m", "streamlit", "run", main_file, "--server.port", port]
    print(f"Starting books game: {main_file} on port {port}")

    process = subprocess.Popen(command)

    # Give the server a moment before pointing the browser (the iPad kiosk) at it.
    time.sleep(2)
    if os.getenv("BOOKOR_NO_BROWSER", "").strip().lower() not in {"1", "true", "yes"}:
        webbrowser.open(f"http://localhost:{port}")

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\nStopping books game server...")
        process.terminate()


if __name__ == "__main__":
    run_streamlit()
