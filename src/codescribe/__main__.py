from codescribe.cli import main

main()
