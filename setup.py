from glob import glob
from setuptools import setup


setup(
    name='rpnc',
    version='2.1.7',
    description='Programmable RPN calculator',
    url='https://github.com/TLINDEN/rpnc',
    install_requires=[
        'regex',
        'prompt_toolkit',
        'lupa',
        'scipy',
    ],
    packages=['rpnc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.11',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    scripts=glob('bin/*'),
    license='GPL-3.0-or-later',
)
