"""
Сборщик disktop в один исполняемый файл
"""
import os
import shutil
import subprocess
import sys

NAME = 'disktop'

def build():
    print("Очистка старых сборок...")
    for folder in ['build', 'dist']:
        if os.path.exists(folder):
            shutil.rmtree(folder)

    print("Сборка exe...")

    cmd = [
        'pyinstaller',
        '--onefile',
        '--console',
        '--name', NAME,
        '--paths', '.',
        '--hidden-import', 'psutil',
        os.path.join('disktop', '__main__.py'),
    ]

    result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode == 0:
        exe = NAME + ('.exe' if sys.platform.startswith('win') else '')
        exe_src = os.path.join('dist', exe)
        print("Сборка завершена!")
        print(f"Исполняемый файл: {exe_src}")

        release_dir = 'release'
        os.makedirs(release_dir, exist_ok=True)
        shutil.copy(exe_src, os.path.join(release_dir, exe))

        if os.path.exists('README.md'):
            shutil.copy('README.md', os.path.join(release_dir, 'README.md'))

        print(f"Релиз собран в папке: {release_dir}/")
    else:
        print("Ошибка сборки:")
        print(result.stderr)
        sys.exit(1)

if __name__ == '__main__':
    build()
