from lack.main import main

main()
