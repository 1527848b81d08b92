from noisegrade.cli import main

main()
