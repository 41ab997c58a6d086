from tenkai.app import main

main()
