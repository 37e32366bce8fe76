"""Static shell configuration written by the shell profile."""

from typing import Dict

ZPROFILE = """\
# shell profiling - time
zmodload zsh/zprof

autoload -Uz compinit
if [ $(date +'%j') != $(/usr/bin/stat -f '%Sm' -t '%j' ${ZDOTDIR:-$HOME}/.zcompdump) ]; then
    compinit
else
    compinit -C
fi

## Your language environment
export LANG=en_US.UTF-8

# Auto Tab Complete
autoload -Uz compinit && compinit

# Path
homebrew_prefix_default=/opt/homebrew
export PATH="$homebrew_prefix_default/bin:$PATH"
"""

ZSHRC = """\
###################################################################

## Measure & Improve
timezsh() {
  shell=${1-$SHELL}
  for i in $(seq 1 10); do /usr/bin/time $shell -i -c exit; done
}

## Time Plugins
timeplugins() {
  for plugin ($plugins); do
    timer=$(($(gdate +%s%N)/1000000))
    if [ -f $ZSH_CUSTOM/plugins/$plugin/$plugin.plugin.zsh ]; then
      source $ZSH_CUSTOM/plugins/$plugin/$plugin.plugin.zsh
    elif [ -f $ZSH/plugins/$plugin/$plugin.plugin.zsh ]; then
      source $ZSH/plugins/$plugin/$plugin.plugin.zsh
    fi
    now=$(($(gdate +%s%N)/1000000))
    elapsed=$(($now-$timer))
    echo $elapsed":" $plugin
  done
}

## Check & source file
function source_file(){
  file=$1
  if [ -f "$file" ]; then
      source $file
  else
      echo -e "Error sourcing $file. Check $HOME/.zprofile"
  fi
}

## oh-my-zsh
export ZSH="$HOME/.oh-my-zsh"
export ZSH_THEME="robbyrussell"

plugins=(
  git
  zsh-syntax-highlighting
  zsh-autosuggestions
)

source_file "$HOME/.oh-my-zsh/oh-my-zsh.sh"
if [[ "$(uname -m)" == "arm64" ]]; then
  source_file "/opt/homebrew/share/zsh-autosuggestions/zsh-autosuggestions.zsh"
  source_file "/opt/homebrew/share/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh"
else
  source_file "/usr/local/share/zsh-autosuggestions/zsh-autosuggestions.zsh"
  source_file "/usr/local/share/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh"
fi

source_file "$HOME/.alias.sh"
"""

ALIASES = """\
#!/usr/bin/env sh

# Edit ohmyzsh
alias ohmyzsh="code ~/.oh-my-zsh"

# Mac Alias
alias clean-mac='find . -name ".DS_Store" -type f -delete'

# zsh config
alias zshconfig='code ~/.zshrc ~/.zprofile ~/.alias.sh'

# Find port
lsof_port() {
    lsof -nP -iTCP -sTCP:LISTEN | grep "$1"
}
"""

# Keyed like Config.dotfiles
DOTFILE_TEMPLATES: Dict[str, str] = {
    "zprofile": ZPROFILE,
    "zshrc": ZSHRC,
    "aliases": ALIASES,
}
