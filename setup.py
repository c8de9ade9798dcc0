from setuptools import find_namespace_packages, setup

setup(
    name='releasepick',
    version='0.1.0',
    description='Browse GitHub releases and install their APK on an Android device',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['releasepick*']),
    python_requires='>=3.9',
    install_requires=[
        'requests',
        'rich',
        'platformdirs',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'releasepick=releasepick.cli:main',
        ],
    },
)
