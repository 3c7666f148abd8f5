from samplerepo.cli import main

main()
