import subprocess
import sys
import time
import os
import signal
import atexit

_processes = []


def cleanup():
    for proc in _processes:
        if proc.poll() is None:
            try:
                if sys.platform == "win32":
                    subprocess.run(
                        ["taskkill", "/F", "/T", "/PID", str(proc.pid)],
                        capture_output=True
                    )
                else:
                    proc.send_signal(signal.SIGTERM)
                    proc.wait(timeout=10)
            except Exception:
                proc.kill()


def signal_handler(signum, frame):
    print("\n\nShutting down...")
    cleanup()
    sys.exit(0)


def main():
    print("\nStarting Tier Alert Service...\n")

    atexit.register(cleanup)
    signal.signal(signal.SIGINT, signal_handler)
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, signal_handler)

    root = os.path.dirname(os.path.abspath(__file__))
    backend_dir = os.path.join(root, "backend")
    port = os.getenv("PORT", "3000")

    backend = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "main:app", "--host", "0.0.0.0", "--port", port],
        cwd=backend_dir,
    )
    _processes.append(backend)

    print(f"\nAPI:  http://localhost:{port}/docs")
    print("\nPress Ctrl+C to stop\n")

    try:
        while True:
            if backend.poll() is not None:
                print("Backend stopped unexpectedly")
                break
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        cleanup()


if __name__ == "__main__":
    main()
