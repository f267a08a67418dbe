"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='lapis-lang',
	version='0.0.1',
	packages=['lapis', ],
	license='MIT',
	description='Demand-driven type inference with on-the-fly method specialization for a small Ruby-flavoured language',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Compilers",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	],
)
