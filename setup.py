from setuptools import setup


setup(
    name='walign',
    license='Apache 2.0',
    description='Word alignment with IBM model 1',
    version='0.0.dev1',
    packages=['walign'],
    install_requires=['numpy'],
    extras_require={'test': ['pytest']},
)
