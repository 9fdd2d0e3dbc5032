import platform
import shlex  # 用于安全地分割字符串为列表，处理带引号的参数
import subprocess
import sys

OUTPUT_NAME = "modpack-installer"


def build_with_nuitka():
    print(f"Detected OS: {platform.system()}")

    # 单文件可执行程序可以被重命名为编码后的清单 URL，
    # 例如 https;--example.com-modpack.json.exe
    suffix = ".exe" if platform.system() == "Windows" else ".bin"
    nuitka_command = [
        sys.executable,
        "-m",
        "nuitka",
        "--onefile",
        "--enable-console",
        f"--output-filename={OUTPUT_NAME}{suffix}",
        "--include-package=modpack_installer",
        "--assume-yes-for-downloads",
        "modpack_installer/__main__.py",
    ]
    print("\nStarting Nuitka build process with command:")
    print(" ".join(shlex.quote(arg) for arg in nuitka_command))
    print("-" * 50)

    try:
        subprocess.run(nuitka_command, check=True)
        print("-" * 50)
        print(f"Nuitka build finished: {OUTPUT_NAME}{suffix}")

    except subprocess.CalledProcessError as e:
        print("-" * 50)
        print("Error during Nuitka build:")
        print(f"Command: {e.cmd}")
        print(f"Return Code: {e.returncode}")
        sys.exit(1)

    except FileNotFoundError:
        print("-" * 50)
        print("Error: Nuitka or Python executable not found.")
        print("Install the build extra first: pip install -e .[build]")
        sys.exit(1)


if __name__ == "__main__":
    build_with_nuitka()
